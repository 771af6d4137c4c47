from .config import DEFAULT_CONFIG, MinifierConfig
from .errors import (
	DelegateTimeoutError,
	EngineDefectError,
	HTMLSqueezeError,
	InvalidInputError,
	MinificationError,
)
from .flask_squeeze import Squeeze
from .minify import minify
from .tokenizer import parse_attributes, tokenize

__all__ = [
	"DEFAULT_CONFIG",
	"DelegateTimeoutError",
	"EngineDefectError",
	"HTMLSqueezeError",
	"InvalidInputError",
	"MinificationError",
	"MinifierConfig",
	"Squeeze",
	"minify",
	"parse_attributes",
	"tokenize",
]
