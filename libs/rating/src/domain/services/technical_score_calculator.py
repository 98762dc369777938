"""Technical Score Calculator

Maps one technical indicator snapshot to a 0-100 sub-score:
- RSI: optimal 45-65 band, oversold beats deep overbought
- MACD: crossover, histogram acceleration, zero line
- Bollinger: band position, squeeze, price vs middle band
- Moving averages: EMA ordering, price vs EMAs, golden cross, EMA vs SMA
- Confluence: share of indicators pointing the same way
"""

import logging
import math

from injector import inject

from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.factor_analysis_dto import DetailedAnalysisDTO
from libs.shared.src.dtos.rating.technical_indicators_dto import (
    BollingerDTO,
    MacdDTO,
    TechnicalIndicatorsDTO,
)
from libs.shared.src.constants.rating_weights import NEUTRAL_SCORE

TECHNICAL_WEIGHTS = {
    "rsi": 0.25,  # momentum oscillator
    "macd": 0.25,  # trend and momentum
    "bollinger": 0.20,  # volatility and position
    "moving_averages": 0.20,  # trend direction
    "confluence": 0.10,  # multi-indicator alignment
}

MA_PERIODS = ["12", "26", "50", "200"]


def calculate_rsi_score(rsi: float) -> float:
    """RSI sub-score

    Highest in the 45-65 band. Oversold (<=30) still scores up to 80
    as a reversal opportunity, deep overbought decays to a floor of 20.
    """
    if rsi >= 70:
        return max(20.0, 100 - (rsi - 70) * 2.5)
    if rsi <= 30:
        return min(80.0, 100 - rsi)
    if 45 <= rsi <= 65:
        return clamp(85 + (60 - abs(rsi - 55)) * 0.5)
    return 50 + (rsi - 50) * 0.8


def calculate_macd_score(macd: MacdDTO) -> float:
    """MACD sub-score from crossover, histogram and zero line"""
    score = 50.0

    separation = abs(macd["macd"] - macd["signal"])
    if macd["macd"] > macd["signal"]:
        score += 25
        # MACD values are small, scale separation up
        score += min(15.0, separation * 1000)
    else:
        score -= 20

    if macd["histogram"] > 0:
        score += 15
        if macd["histogram"] > separation * 0.5:
            score += 10  # acceleration
    else:
        score -= 10

    if macd["macd"] > 0:
        score += 10
    else:
        score -= 5

    return clamp(score)


def calculate_bollinger_score(bollinger: BollingerDTO, price: float) -> float:
    """Bollinger sub-score from band position, squeeze and middle band"""
    position = bollinger["position"]
    score = 50.0

    if position > 0.8:
        score += 10 + (position - 0.8) * 50
    elif position < 0.2:
        score += 30 + (0.2 - position) * 100
    elif 0.4 <= position <= 0.6:
        score += 20
    else:
        score += abs(position - 0.5) * 20

    middle = bollinger["middle"]
    if middle:
        band_width = (bollinger["upper"] - bollinger["lower"]) / middle
        if band_width < 0.1:
            score += 15  # squeeze, breakout likely
        elif band_width > 0.3:
            score -= 10

    if price > middle:
        score += 10
    else:
        score -= 5

    return clamp(score)


def calculate_moving_average_score(
    ema: dict[str, float], sma: dict[str, float], price: float
) -> float:
    """Moving-average sub-score

    Scored ×0.7 when fewer than two of the four signals are available.
    """
    score = 50.0
    valid_signals = 0

    ema_values = [
        (int(period), ema[period])
        for period in MA_PERIODS
        if ema.get(period) is not None
    ]
    ema_values.sort()

    if len(ema_values) >= 2:
        alignment = 0
        for (_, shorter), (_, longer) in zip(ema_values, ema_values[1:]):
            alignment += 1 if shorter > longer else -1
        score += alignment / (len(ema_values) - 1) * 25
        valid_signals += 1

    if ema_values:
        price_vs_ema = sum(1 if price > value else -1 for _, value in ema_values)
        score += price_vs_ema / len(ema_values) * 20
        valid_signals += 1

    if ema.get("50") and ema.get("200"):
        score += 15 if ema["50"] > ema["200"] else -10  # golden / death cross
        valid_signals += 1

    if ema.get("26") and sma.get("26"):
        score += 10 if ema["26"] > sma["26"] else -5
        valid_signals += 1

    if valid_signals < 2:
        score *= 0.7

    return clamp(score)


def calculate_confluence_score(indicators: TechnicalIndicatorsDTO) -> float:
    """Share of bullish indicators, scaled as ratio^0.8 * 100"""
    bullish = 0.0
    total = 0

    rsi = indicators["rsi"]
    if 40 <= rsi <= 70:
        bullish += 1
    elif rsi > 70:
        bullish += 0.3
    total += 1

    macd = indicators["macd"]
    if macd["macd"] > macd["signal"] and macd["histogram"] > 0:
        bullish += 1
    elif macd["macd"] > macd["signal"]:
        bullish += 0.7
    total += 1

    position = indicators["bollinger"]["position"]
    if position < 0.3 or 0.5 < position < 0.9:
        bullish += 1
    elif position > 0.9:
        bullish += 0.4
    total += 1

    ema_values = [
        v for v in indicators.get("ema", {}).values() if v is not None and not math.isnan(v)
    ]
    if len(ema_values) >= 2:
        short_ema = min(ema_values)
        long_ema = max(ema_values)
        if short_ema > long_ema * 0.98:
            bullish += 1
        elif short_ema > long_ema * 0.95:
            bullish += 0.6
        total += 1

    ratio = bullish / total if total > 0 else 0.5
    return clamp(ratio**0.8 * 100)


def _factor_scores(indicators: TechnicalIndicatorsDTO, price: float) -> dict[str, float]:
    return {
        "rsi": calculate_rsi_score(indicators["rsi"]),
        "macd": calculate_macd_score(indicators["macd"]),
        "bollinger": calculate_bollinger_score(indicators["bollinger"], price),
        "moving_averages": calculate_moving_average_score(
            indicators.get("ema", {}), indicators.get("sma", {}), price
        ),
        "confluence": calculate_confluence_score(indicators),
    }


def calculate_technical_score(
    indicators: TechnicalIndicatorsDTO, context: AnalysisContextDTO
) -> float:
    """Weighted technical sub-score (0-100)

    Raises on malformed input; TechnicalScoreCalculator wraps it.
    """
    price = context["token_data"].get("price", 0.0)
    scores = _factor_scores(indicators, price)
    return clamp(sum(scores[key] * weight for key, weight in TECHNICAL_WEIGHTS.items()))


def _signal(score: float) -> str:
    if score > 70:
        return "BULLISH"
    if score > 50:
        return "NEUTRAL"
    return "BEARISH"


def _rsi_description(rsi: float) -> str:
    if rsi > 70:
        return f"Overbought at {rsi:.1f} - potential reversal zone"
    if rsi < 30:
        return f"Oversold at {rsi:.1f} - potential bounce opportunity"
    if 45 <= rsi <= 65:
        return f"Healthy momentum at {rsi:.1f} - bullish zone"
    return f"Neutral momentum at {rsi:.1f}"


def _macd_description(macd: MacdDTO) -> str:
    trend = "Bullish" if macd["macd"] > macd["signal"] else "Bearish"
    momentum = "accelerating" if macd["histogram"] > 0 else "decelerating"
    return f"{trend} trend with {momentum} momentum"


def _bollinger_description(bollinger: BollingerDTO) -> str:
    position = bollinger["position"]
    if position > 0.8:
        return f"Near upper band ({position * 100:.1f}%) - potential resistance"
    if position < 0.2:
        return f"Near lower band ({position * 100:.1f}%) - potential support"
    return f"Mid-channel position ({position * 100:.1f}%) - neutral zone"


def _moving_average_description(ema: dict[str, float], price: float) -> str:
    ema26 = ema.get("26")
    ema50 = ema.get("50")
    if ema26 and ema50:
        if price > ema26 > ema50:
            return "Strong bullish alignment - price above short and long EMAs"
        if price < ema26 < ema50:
            return "Bearish alignment - price below EMAs with downtrend"
    return "Mixed moving average signals - trend unclear"


def analyze_technical(
    indicators: TechnicalIndicatorsDTO, context: AnalysisContextDTO
) -> DetailedAnalysisDTO:
    """Factor-by-factor explanation built from the same sub-scores as the score"""
    price = context["token_data"].get("price", 0.0)
    scores = _factor_scores(indicators, price)
    confluence = scores["confluence"]

    if confluence > 70:
        confluence_signal = "STRONG"
    elif confluence > 50:
        confluence_signal = "MODERATE"
    else:
        confluence_signal = "WEAK"

    return {
        "score": clamp(sum(scores[k] * w for k, w in TECHNICAL_WEIGHTS.items())),
        "factors": {
            "rsi": {
                "score": scores["rsi"],
                "signal": _signal(scores["rsi"]),
                "description": _rsi_description(indicators["rsi"]),
                "weight": TECHNICAL_WEIGHTS["rsi"],
            },
            "macd": {
                "score": scores["macd"],
                "signal": _signal(scores["macd"]),
                "description": _macd_description(indicators["macd"]),
                "weight": TECHNICAL_WEIGHTS["macd"],
            },
            "bollinger": {
                "score": scores["bollinger"],
                "signal": _signal(scores["bollinger"]),
                "description": _bollinger_description(indicators["bollinger"]),
                "weight": TECHNICAL_WEIGHTS["bollinger"],
            },
            "moving_averages": {
                "score": scores["moving_averages"],
                "signal": _signal(scores["moving_averages"]),
                "description": _moving_average_description(
                    indicators.get("ema", {}), price
                ),
                "weight": TECHNICAL_WEIGHTS["moving_averages"],
            },
            "confluence": {
                "score": confluence,
                "signal": confluence_signal,
                "description": f"{confluence:.1f}% of technical indicators showing bullish alignment",
                "weight": TECHNICAL_WEIGHTS["confluence"],
            },
        },
    }


class TechnicalScoreCalculator:
    """Technical sub-score (Domain Service)

    Never raises: malformed input yields the neutral score.
    """

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)

    def calculate(
        self, indicators: TechnicalIndicatorsDTO, context: AnalysisContextDTO
    ) -> float:
        try:
            score = calculate_technical_score(indicators, context)
            token_address = (context.get("token_data") or {}).get("address", "unknown")
            self._logger.debug(f"Technical score {score:.1f} for {token_address}")
            return score
        except Exception as e:
            self._logger.error(f"Technical score calculation failed: {e}")
            return float(NEUTRAL_SCORE)

    def get_detailed_analysis(
        self, indicators: TechnicalIndicatorsDTO, context: AnalysisContextDTO
    ) -> DetailedAnalysisDTO:
        return analyze_technical(indicators, context)
