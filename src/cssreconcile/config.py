from __future__ import annotations

from dataclasses import dataclass

# Selector prefixes that mark theme-specific code when carving a library
# reference out of a compiled theme stylesheet.
DEFAULT_CUSTOM_PREFIXES = (
    ".du-",
    ".paragraph--type--",
    ".alumni",
    ".poverty-homelessness",
    ".clinics",
    ".unit-",
    ".site-name",
    ".site-prefix",
    ".header",
    "#block-",
    "#main-menu",
    ".sub-menu",
    ".mega-nav",
    ".hero-",
)

DEFAULT_BUNDLE_SOURCES = (
    ("Foundation Reference", "scripts/foundation-reference.css"),
    ("Drupal Seven Tabs CSS", "../../contrib/seven/css/components/tabs.css"),
    ("Slick Carousel CSS", "../../../libraries/slick-carousel/slick/slick.css"),
)


@dataclass(frozen=True)
class ExtractConfig:
    stylesheet: str = "dest/sparkle.css"
    references: tuple[str, ...] = ("scripts/.reference-libs.css",)
    variables: str | None = "scss/_variables.scss"
    output: str = "scss/_customizations-only.scss"
    audit: str = "scripts/.removed-library-rules.css"
    patterns_file: str | None = None
    use_patterns: bool = True
    strip_comments: bool = False
    strip_preserved: bool = True
    title: str = "Theme Customizations"


@dataclass(frozen=True)
class ValidateConfig:
    before: str = "dest/style.css.backup"
    after: str = "dest/style.css"
    report: str = "scripts/extraction-diff-report.txt"


@dataclass(frozen=True)
class BundleConfig:
    sources: tuple[tuple[str, str], ...] = DEFAULT_BUNDLE_SOURCES
    output: str = "scripts/.reference-libs.css"


@dataclass(frozen=True)
class LibraryReferenceConfig:
    stylesheet: str = "dest/sparkle.css"
    exclude: tuple[str, ...] = DEFAULT_CUSTOM_PREFIXES
    output: str = "scripts/foundation-reference.css"
    title: str = "Library Reference"
