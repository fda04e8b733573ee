import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

MomentStrategy = Literal["auto", "range", "working_set", "none"]


class TimeClusteringConfig(BaseModel):
    time_gap_minutes: float = Field(default=180, gt=0)
    min_cluster_size: int = Field(default=3, ge=1)

    @property
    def gap_ms(self) -> float:
        return self.time_gap_minutes * 60 * 1000


class Config(BaseSettings):
    APP_NAME: str = "Photo Clusters Service"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    # Logging configuration
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8081"

    # Clustering
    TIME_GAP_MINUTES: float = Field(default=180, gt=0)
    MIN_CLUSTER_SIZE: int = Field(default=3, ge=1)
    MAX_ASSETS: int = Field(default=2500, gt=0)
    PAGE_SIZE: int = Field(default=200, gt=0)
    MOMENT_EDGE_PADDING_MINUTES: float = Field(default=2, ge=0)
    MOMENT_STRATEGY: MomentStrategy = "auto"

    # Display
    DATE_FORMAT: str = "%Y-%m-%d"
    TIME_FORMAT: str = "%H:%M"

    # Asset source
    ASSET_SOURCE_TYPE: str = "local"
    MEDIA_ROOT: str = "./media"
    MEDIA_SERVICE_URL: Optional[str] = None
    MEDIA_SERVICE_API_KEY: Optional[str] = None
    MEDIA_SERVICE_TIMEOUT: float = 10.0

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def time_clustering(self) -> TimeClusteringConfig:
        return TimeClusteringConfig(
            time_gap_minutes=self.TIME_GAP_MINUTES,
            min_cluster_size=self.MIN_CLUSTER_SIZE,
        )

    @property
    def moment_padding_ms(self) -> int:
        return int(self.MOMENT_EDGE_PADDING_MINUTES * 60 * 1000)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


configs = Config()
