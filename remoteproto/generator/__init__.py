"""Remote view model schema generator."""

from .emitter import GenerationResult as GenerationResult
from .emitter import GeneratorOptions as GeneratorOptions
from .emitter import SchemaEmitter as SchemaEmitter
from .emitter import generate as generate
from .errors import *
from .parser import ValidationError as ValidationError
from .parser import parse as parse
from .proto import render as render
from .schema import *
from .types import *
