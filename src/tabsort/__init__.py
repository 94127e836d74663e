"""tabsort: reorder selected browser tabs by URL or publication date."""

__version__ = "0.1.0"
