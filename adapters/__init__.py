from .btcmarkets_adapter import BtcMarketsAdapter

__all__ = ['BtcMarketsAdapter']
