"""
Modelos de datos para Analytics API.
Define los schemas de trips, forecasts y waste, además de los
request/response de los endpoints de análisis.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator


# ============================================================================
# ENUMS
# ============================================================================

class Severity(str, Enum):
    """Severidad de anomalías y recomendaciones."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class AnomalyType(str, Enum):
    """Tipos de anomalía de ruta."""
    IRREGULAR_STOPS = "irregular_stops"
    INEFFICIENT_ROUTE = "inefficient_route"


class RecommendationType(str, Enum):
    """Tipos de recomendación para un conductor."""
    NO_DATA = "no_data"
    ROUTE_OPTIMIZATION = "route_optimization"
    STOP_REDUCTION = "stop_reduction"
    SPEED_MANAGEMENT = "speed_management"
    TRAFFIC_MANAGEMENT = "traffic_management"
    GENERAL = "general"


class WasteCategory(str, Enum):
    """Categorías de desperdicio de cocina."""
    INGREDIENT = "ingredientWaste"
    SERVING = "servingWaste"
    EXPIRATION = "expirationWaste"


class ViewMode(str, Enum):
    """Granularidad de la vista de desperdicio."""
    MONTHLY = "monthly"
    DAILY = "daily"


# ============================================================================
# TRIPS
# ============================================================================

class RoutePoint(BaseModel):
    """Muestra GPS de una ruta."""

    lat: float = Field(..., validation_alias=AliasChoices("lat", "latitude"))
    lon: float = Field(..., validation_alias=AliasChoices("lon", "longitude"))
    timestamp: Optional[Any] = Field(
        default=None,
        description="Se conserva tal cual; la detección de paradas solo usa lat/lon",
    )


class DriverInfo(BaseModel):
    """Identidad de un conductor."""

    id: str
    email: Optional[str] = None


class TripRecord(BaseModel):
    """Viaje registrado por un vehículo."""

    id: str
    driver_id: str
    start_time: datetime
    end_time: Optional[datetime] = Field(
        default=None,
        description="None mientras el viaje está en curso",
    )
    distance_km: float = Field(default=0.0, ge=0)
    start_lat: float
    start_lon: float
    end_lat: Optional[float] = None
    end_lon: Optional[float] = None
    route_points: Optional[Any] = Field(
        default=None,
        description="Lista de puntos o JSON serializado; se valida al analizar",
    )

    @model_validator(mode="after")
    def _check_times(self) -> "TripRecord":
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None

    @property
    def duration_hours(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds() / 3600


class AnomalyLocation(BaseModel):
    latitude: float
    longitude: float


class Anomaly(BaseModel):
    """Anomalía detectada en un viaje."""

    trip_id: str
    type: AnomalyType
    severity: Severity
    details: str
    timestamp: datetime
    location: Optional[AnomalyLocation] = None


class Recommendation(BaseModel):
    type: RecommendationType
    severity: Severity
    message: str


class DriverPerformance(BaseModel):
    """Scores de desempeño (enteros 0-100)."""

    safety_score: int = Field(default=0, ge=0, le=100)
    efficiency_score: int = Field(default=0, ge=0, le=100)
    consistency_score: int = Field(default=0, ge=0, le=100)
    overall_score: int = Field(default=0, ge=0, le=100)


class TripStatistics(BaseModel):
    """Totales acumulados de los viajes de un conductor."""

    trips_count: int = 0
    total_distance_km: float = 0.0
    total_hours: float = 0.0
    average_speed_kmh: float = 0.0
    irregular_stops: int = 0
    inefficient_routes: int = 0
    fuel_estimate_l: float = 0.0


class RouteAnalysisResult(BaseModel):
    """Resultado del análisis de rutas de un conductor."""

    driver_id: str
    driver_email: Optional[str] = None
    total_trips: int
    total_distance: float
    total_hours: float
    average_speed: float
    irregular_stops: int
    inefficient_routes: int
    fuel_consumption_estimate: float
    cost_saving_opportunities: float
    driver_performance: DriverPerformance
    recommendations: List[Recommendation] = Field(default_factory=list)
    anomalies: List[Anomaly] = Field(default_factory=list)


# ============================================================================
# BUDGET FORECAST
# ============================================================================

class MonthlyConsumption(BaseModel):
    """Gasto histórico de un mes, por categoría."""

    month: str
    year: int
    food_consumption: float = 0.0
    assets_purchased: float = 0.0
    vehicle_rental_costs: float = 0.0
    total: float = 0.0


class PredictionBand(BaseModel):
    """Monto predicho con su intervalo de confianza."""

    predicted_amount: float
    upper_bound: float
    lower_bound: float
    confidence: float = Field(default=0.0, ge=0, le=1)


class CategoryPredictions(BaseModel):
    food: PredictionBand
    vehicle_rental: PredictionBand


class BudgetPrediction(BaseModel):
    """Predicción de presupuesto anclada a un horizonte (1, 3 o 6 meses)."""

    months: int = Field(..., ge=1, description="Horizonte en meses")
    prediction: PredictionBand
    category_predictions: Optional[CategoryPredictions] = None


class ForecastPoint(BaseModel):
    """Predicción densificada para un mes futuro."""

    month: str
    year: int
    predicted_amount: float
    upper_bound: float
    lower_bound: float
    confidence: float
    category_predictions: Optional[CategoryPredictions] = None


class CategoryForecast(BaseModel):
    """Predicción mensual desglosada por categoría."""

    month: str
    year: int
    food_consumption: float
    assets_purchased: float
    vehicle_rental_costs: float
    total: float
    confidence: float


# ============================================================================
# WASTE
# ============================================================================

class WasteDisposal(BaseModel):
    """Registro de desecho de alimentos."""

    reason: Optional[str] = None
    cost: float = 0.0
    quantity: float = 0.0
    created_at: datetime


class WasteCostPoint(BaseModel):
    """Costo agregado para un mes (YYYY-MM) o día (YYYY-MM-DD)."""

    key: str
    cost: float = 0.0
    quantity: float = 0.0


class WasteChartView(BaseModel):
    """Series alineadas por etiqueta para la vista de desperdicio."""

    view_mode: ViewMode
    labels: List[str] = Field(default_factory=list)
    historical: Dict[WasteCategory, List[float]] = Field(default_factory=dict)
    forecast: Dict[WasteCategory, List[float]] = Field(default_factory=dict)
    forecast_months: List[str] = Field(default_factory=list)


# ============================================================================
# REQUEST / RESPONSE MODELS
# ============================================================================

class DriverRoutesRequest(BaseModel):
    """Request para el análisis de rutas de conductores."""

    driver_id: Optional[str] = Field(
        default=None,
        description="Conductor a analizar; si se omite se analizan todos",
    )
    actor_id: Optional[str] = Field(default=None, description="Usuario que solicita el análisis")
    drivers: List[DriverInfo] = Field(default_factory=list)
    trips: List[TripRecord] = Field(default_factory=list)


class DriverRoutesResponse(BaseModel):
    success: bool = True
    analysis_results: List[RouteAnalysisResult] = Field(default_factory=list)


class ForecastRequest(BaseModel):
    """Request para construir el forecast por categoría."""

    budget_predictions: List[BudgetPrediction] = Field(default_factory=list)
    historical_monthly: List[MonthlyConsumption] = Field(default_factory=list)
    reference_date: Optional[date] = Field(
        default=None,
        description="Mes base; el forecast empieza el mes siguiente",
    )


class ForecastResponse(BaseModel):
    forecast_points: List[ForecastPoint] = Field(default_factory=list)
    category_forecasts: List[CategoryForecast] = Field(default_factory=list)


class WasteViewRequest(BaseModel):
    """Request para la vista de desperdicio por categoría."""

    view_mode: ViewMode = ViewMode.MONTHLY
    disposals: List[WasteDisposal] = Field(default_factory=list)
    forecast_months: int = Field(default=3, ge=0, le=12)
    reference_date: Optional[date] = None


