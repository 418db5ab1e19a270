from .load_generator import LoadGenerator as LoadGenerator
from .load_generator_config import LoadGeneratorConfig as LoadGeneratorConfig
