"""Turn a business website into a knowledge base for a customer support bot."""

__version__ = "1.0.0"
