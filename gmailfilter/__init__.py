"""gmailfilter - manage Gmail filters and labels as declarative resources.

Packages:
- gmailfilter.gmail: Thin Gmail API operations for filters and labels
- gmailfilter.framework: Provider lifecycle contract (schemas, state, host)
- gmailfilter.provider: The Gmail filter provider, its resources and data sources
- gmailfilter.cli: Command-line driver for the provider
"""

__version__ = "0.2.0"
