from typing import Optional

from pydantic import BaseModel, Field

from vectorcore.utils.constants import DEFAULT_BATCH_SIZE, DEFAULT_RERANK_LIMIT


class ModelFilesConfig(BaseModel):
    config_file: str = Field(default="config.json")
    tokenizer_file: str = Field(default="tokenizer.json")
    onnx_model: str = Field(default="model.onnx")


class SessionConfig(BaseModel):
    provider: str = Field(default="CPUExecutionProvider")
    graph_optimization: str = Field(default="all")
    intra_op_threads: Optional[int] = Field(default=None, gt=0)
    serialize_inference: bool = Field(default=False)


class EmbeddingConfig(BaseModel):
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)
    max_length: Optional[int] = Field(default=None, gt=2)
    normalize: bool = Field(default=True)
    pooling_strategy: str = Field(default="mean")


class RerankConfig(BaseModel):
    limit: int = Field(default=DEFAULT_RERANK_LIMIT, gt=0)
    return_score: bool = Field(default=True)


class LoggingConfig(BaseModel):
    folder: Optional[str] = None
    level: str = Field(default="INFO")


class InferenceSettings(BaseModel):
    files: ModelFilesConfig = Field(default_factory=ModelFilesConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    rerank: RerankConfig = Field(default_factory=RerankConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
