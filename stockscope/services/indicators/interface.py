"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Optional, Sequence

from stockscope.services.base import BaseService
from stockscope.schemas.indicators import (
    RSIResult,
    MACDResult,
    BollingerBandsResult,
    MovingAveragesResult,
    VolumeAnalysisResult,
    TechnicalIndicatorsOutput,
)


class IndicatorServiceInterface(BaseService[str, Optional[TechnicalIndicatorsOutput]]):
    """
    Indicator Engine Service Contract.

    INPUT: symbol

    OUTPUT: TechnicalIndicatorsOutput
        - RSI, MACD, Bollinger Bands, moving averages, volume analysis
        - Each component is None when history is too short
        - None overall when the symbol has no data

    Results are memoized per (symbol, indicator, parameters).
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: str) -> Optional[TechnicalIndicatorsOutput]:
        """Calculate all indicators for a symbol."""
        pass

    @abstractmethod
    async def compute_rsi(self, symbol: str, period: int = 14) -> Optional[RSIResult]:
        pass

    @abstractmethod
    async def compute_macd(
        self,
        symbol: str,
        fast_period: int = 12,
        slow_period: int = 26,
        signal_period: int = 9,
    ) -> Optional[MACDResult]:
        pass

    @abstractmethod
    async def compute_bollinger_bands(
        self, symbol: str, period: int = 20, std_dev: float = 2.0
    ) -> Optional[BollingerBandsResult]:
        pass

    @abstractmethod
    async def compute_moving_averages(
        self, symbol: str, periods: Sequence[int] = (5, 10, 20, 50)
    ) -> Optional[MovingAveragesResult]:
        pass

    @abstractmethod
    async def compute_volume_analysis(
        self, symbol: str, period: int = 20
    ) -> Optional[VolumeAnalysisResult]:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
