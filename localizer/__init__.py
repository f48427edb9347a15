"""localizer-core: string extraction, source rewriting and locale sync for i18n projects."""

__version__ = "0.4.0"
