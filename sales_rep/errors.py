class SalesRepError(Exception):
	"""Base class for errors raised by the analysis pipeline."""


class ConfigurationError(SalesRepError):
	"""A required setting (usually a credential) is missing."""


class SitemapUnavailable(SalesRepError):
	def __init__(self, url: str, status_code: int):
		super().__init__(f"Sitemap not found: {status_code} ({url})")
		self.url = url
		self.status_code = status_code
