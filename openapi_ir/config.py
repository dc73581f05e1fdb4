from pydantic import Field
from pydantic_settings import BaseSettings

from .complexity import DEFAULT_COMPLEXITY_THRESHOLD
from .ir.document import IR_VERSION


class IRSettings(BaseSettings):
    # Schemas scoring below this are inlined by renderers; -1 inlines everything
    complexity_threshold: int = Field(DEFAULT_COMPLEXITY_THRESHOLD, ge=-1)
    ir_version: str = IR_VERSION
    log_level: str = "INFO"

    class Config:
        env_prefix = "OPENAPI_IR_"
        env_file = ".env"
        extra = "ignore"
