"""
Regime Allocation FastAPI Application
"""

from datetime import datetime

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from regime_alloc import __version__
from regime_alloc.config import configure_logging, settings
from regime_alloc.errors import RegimeAllocError
from regime_alloc.market import MarketObservation
from regime_alloc.pipeline.orchestrator import RegimeAllocationPipeline
from regime_alloc.regime.types import REGIMES, TRANSITION_MATRIX
from regime_alloc.strategies.profiles import STRATEGY_PROFILES


class ObservationIn(BaseModel):
    """One daily market record."""

    date: str
    price: float
    returns: float
    volatility: float


class AnalyzeRequest(BaseModel):
    """Pipeline input."""

    observations: list[ObservationIn]
    window: int | None = Field(None, ge=1, description="Trailing returns per window")
    seed: int | None = Field(None, description="Seed for simulation noise")


class RegimePoint(BaseModel):
    """Regime probabilities at one step."""

    date: str | None
    probabilities: dict[str, float]
    regime: str
    probability: float


class AllocationPoint(BaseModel):
    """Strategy weights at one step."""

    date: str | None
    weights: dict[str, float]


class RegimeStats(BaseModel):
    returns: float
    sharpe: float


class StrategyStats(BaseModel):
    """Simulated strategy performance."""

    name: str
    returns: list[float]
    sharpe: float
    drawdown: float
    volatility: float
    regime_performance: dict[str, RegimeStats]


class PortfolioStats(BaseModel):
    """Portfolio or benchmark summary."""

    returns: list[float]
    cumulative: list[float]
    total_return: float
    sharpe: float
    max_drawdown: float
    volatility: float


class AnalyzeResponse(BaseModel):
    """Full pipeline output."""

    regimes: list[RegimePoint]
    allocations: list[AllocationPoint]
    strategies: list[StrategyStats]
    portfolio: PortfolioStats
    benchmark: PortfolioStats


class StrategyProfileOut(BaseModel):
    name: str
    factors: dict[str, float]
    color: str


class ModelResponse(BaseModel):
    """Fixed model configuration."""

    regimes: list[str]
    transition_matrix: dict[str, dict[str, float]]
    strategies: list[StrategyProfileOut]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: datetime


configure_logging()

app = FastAPI(
    title="Regime Allocation API",
    description="Regime filtering and regime-conditioned strategy allocation",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow(),
    )


@app.get("/model", response_model=ModelResponse, tags=["Model"])
async def get_model():
    """Transition matrix and strategy regime factors."""
    return ModelResponse(
        regimes=[r.value for r in REGIMES],
        transition_matrix={
            src.value: {
                dst.value: float(TRANSITION_MATRIX[i, j])
                for j, dst in enumerate(REGIMES)
            }
            for i, src in enumerate(REGIMES)
        },
        strategies=[
            StrategyProfileOut(
                name=p.name.value,
                factors={r.value: f for r, f in p.factors.items()},
                color=p.color,
            )
            for p in STRATEGY_PROFILES.values()
        ],
    )


@app.post("/analyze", response_model=AnalyzeResponse, tags=["Model"])
def analyze(request: AnalyzeRequest):
    """
    Run regime detection, allocation and portfolio simulation.

    Observations must be in time order. The first ``window`` observations
    only seed the rolling windows and produce no output step.
    """
    pipeline = RegimeAllocationPipeline(window=request.window, seed=request.seed)
    try:
        observations = [
            MarketObservation(
                period_return=o.returns,
                volatility=o.volatility,
                date=o.date,
                price=o.price,
            )
            for o in request.observations
        ]
        result = pipeline.run(observations)
    except (RegimeAllocError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    return AnalyzeResponse(
        regimes=[
            RegimePoint(
                date=s.timestamp,
                probabilities=s.distribution.as_dict(),
                regime=s.most_likely.value,
                probability=s.probability,
            )
            for s in result.states
        ],
        allocations=[
            AllocationPoint(date=s.timestamp, weights=a.as_dict())
            for s, a in zip(result.states, result.allocations)
        ],
        strategies=[
            StrategyStats(**p.to_dict()) for p in result.strategy_performance.values()
        ],
        portfolio=PortfolioStats(**result.portfolio.to_dict()),
        benchmark=PortfolioStats(**result.benchmark.to_dict()),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
