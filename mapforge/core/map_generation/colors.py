"""
Colours and palettes.
"""
from dataclasses import dataclass
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class Color:
    """RGB colour with optional alpha."""
    r: int
    g: int
    b: int
    a: Optional[float] = None

    def darken(self, factor: float) -> "Color":
        """Scale each channel down by ``factor`` (0.0-1.0)."""
        return Color(
            r=max(0, int(self.r * (1 - factor))),
            g=max(0, int(self.g * (1 - factor))),
            b=max(0, int(self.b * (1 - factor))),
            a=self.a,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"r": self.r, "g": self.g, "b": self.b}
        if self.a is not None:
            data["a"] = self.a
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Color":
        return cls(r=data["r"], g=data["g"], b=data["b"], a=data.get("a"))


@dataclass(frozen=True)
class ColorTheme:
    """Coordinated palette chosen once per generation run."""
    name: str
    background_color: Color
    path_color: Color
    accent_color: Optional[Color] = None
    contrast_ratio: float = 1.0

    @property
    def wall_color(self) -> Color:
        """Colour for wall tiles: the accent, or a darkened path colour."""
        return self.accent_color or self.path_color.darken(0.35)

    def darkened(self, background_factor: float, path_factor: float) -> "ColorTheme":
        """Darker variant used for dungeon atmosphere."""
        return ColorTheme(
            name=f"Dark {self.name}",
            background_color=self.background_color.darken(background_factor),
            path_color=self.path_color.darken(path_factor),
            accent_color=self.accent_color.darken(path_factor) if self.accent_color else None,
            contrast_ratio=self.contrast_ratio,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "background_color": self.background_color.to_dict(),
            "path_color": self.path_color.to_dict(),
            "accent_color": self.accent_color.to_dict() if self.accent_color else None,
            "contrast_ratio": self.contrast_ratio,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColorTheme":
        accent = data.get("accent_color")
        return cls(
            name=data["name"],
            background_color=Color.from_dict(data["background_color"]),
            path_color=Color.from_dict(data["path_color"]),
            accent_color=Color.from_dict(accent) if accent else None,
            contrast_ratio=data.get("contrast_ratio", 1.0),
        )

