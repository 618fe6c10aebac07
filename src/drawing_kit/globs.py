"""Constantes para el proyecto.

:author: Shay Hill
:created: 2024-11-19
"""

# ===================================================================================
#   Rangos de color
# ===================================================================================

CHANNEL_MAX = 255

# alpha usa la escala heredada de 7 bits: 0 es opaco, 127 es transparente
ALPHA_MAX = 127

# opacidad en porcentaje: 100 es opaco
OPACITY_MAX = 100

# el color por defecto cuando una definición de color no se puede leer
FALLBACK_RGB = (0, 0, 0)


# ===================================================================================
#   Imágenes
# ===================================================================================

DEFAULT_QUALITY = 75

MIME_TO_FORMAT = {
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/jpeg": "JPEG",
}

FORMAT_TO_MIME = {v: k for k, v in MIME_TO_FORMAT.items()}

SUFFIX_TO_MIME = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

DEFAULT_MIME = "image/png"
