"""
realty_backoffice - Comparative market valuation engine

Values residential properties by the direct comparative method
(NBR 14653-2): homogenize comparables, filter them statistically and
price the target under each finish standard.

Modules:
    - core: Exceptions, logging, settings and valuation constants
    - domain: Value types, models, calculators and repository interface
    - application: Request schemas, valuation and study services, exporter
    - infrastructure: Repository implementations
"""

__version__ = "1.0.0"
