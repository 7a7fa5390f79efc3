"""
Site Theme Constants
Palettes applied by the page renderer, keyed by the business ``theme`` column
"""

DEFAULT_THEME = "modern"

# Tailwind class fragments per theme
THEMES = {
    "modern": {
        "name": "Modern",
        "description": "Vivid blue-to-purple gradients with clean white cards",
        "primary": "from-blue-600 via-indigo-600 to-purple-600",
        "primarySolid": "bg-blue-600",
        "primaryHover": "hover:bg-blue-700",
        "secondary": "bg-indigo-600",
        "accent": "text-purple-600",
        "accentHover": "hover:text-purple-600",
        "navBorder": "border-blue-200",
        "navBg": "bg-white",
        "button": "bg-blue-600 hover:bg-blue-700",
        "cardBg": "bg-white",
        "textPrimary": "text-gray-900",
        "textSecondary": "text-gray-600",
        "footer": "from-gray-900 via-gray-800 to-gray-900",
        "themeColor": "#2563eb",
    },
    "classic": {
        "name": "Classic",
        "description": "Warm amber and orange tones for traditional businesses",
        "primary": "from-amber-600 via-orange-600 to-red-600",
        "primarySolid": "bg-amber-600",
        "primaryHover": "hover:bg-amber-700",
        "secondary": "bg-orange-600",
        "accent": "text-amber-600",
        "accentHover": "hover:text-amber-600",
        "navBorder": "border-amber-200",
        "navBg": "bg-white",
        "button": "bg-amber-600 hover:bg-amber-700",
        "cardBg": "bg-white",
        "textPrimary": "text-gray-900",
        "textSecondary": "text-gray-600",
        "footer": "from-amber-900 via-orange-900 to-red-900",
        "themeColor": "#d97706",
    },
    "minimal": {
        "name": "Minimal",
        "description": "Neutral greys with minimal decoration",
        "primary": "from-gray-100 via-gray-200 to-gray-300",
        "primarySolid": "bg-gray-600",
        "primaryHover": "hover:bg-gray-700",
        "secondary": "bg-gray-500",
        "accent": "text-gray-600",
        "accentHover": "hover:text-gray-600",
        "navBorder": "border-gray-200",
        "navBg": "bg-white",
        "button": "bg-gray-600 hover:bg-gray-700",
        "cardBg": "bg-white",
        "textPrimary": "text-gray-900",
        "textSecondary": "text-gray-600",
        "footer": "from-gray-800 via-gray-700 to-gray-800",
        "themeColor": "#4b5563",
    },
}


def get_themes():
    """Get all available theme keys"""
    return list(THEMES.keys())


def get_theme(theme_name):
    """Get the palette for a theme, falling back to the default theme"""
    return THEMES.get(theme_name) or THEMES[DEFAULT_THEME]


def resolve_theme_name(theme_name):
    """Get a storable theme key for any input"""
    return theme_name if theme_name in THEMES else DEFAULT_THEME
