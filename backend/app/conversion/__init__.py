from .service import CmykConversionService, get_conversion_service
from .models import ConversionMetadata, ConversionResult

__all__ = ["CmykConversionService", "get_conversion_service", "ConversionMetadata", "ConversionResult"]
