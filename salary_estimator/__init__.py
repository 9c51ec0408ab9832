"""Job salary estimator: scrape listings, engineer features, predict missing salaries."""

__version__ = "0.1.0"
