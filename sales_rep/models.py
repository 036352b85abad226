import os
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class PageContent:
	title: str
	meta_description: str
	content: str


@dataclass(frozen=True)
class AnalyzedPage:
	url: str
	title: str
	description: str
	content: str

	def to_dict(self) -> Dict:
		return {
			"url": self.url,
			"title": self.title,
			"description": self.description,
			"content": self.content,
		}

	@classmethod
	def from_dict(cls, data: Dict) -> "AnalyzedPage":
		return cls(
			url=data["url"],
			title=data.get("title", ""),
			description=data.get("description", ""),
			content=data.get("content", ""),
		)


@dataclass
class Screenshots:
	desktop: str
	tablet: str
	mobile: str

	def to_dict(self) -> Dict[str, str]:
		return {"desktop": self.desktop, "tablet": self.tablet, "mobile": self.mobile}

	@classmethod
	def from_dict(cls, data: Optional[Dict]) -> Optional["Screenshots"]:
		if not data:
			return None
		return cls(desktop=data["desktop"], tablet=data["tablet"], mobile=data["mobile"])


@dataclass
class AnalysisResult:
	"""Terminal artifact of one analysis run, persisted as the raw-data JSON."""

	base_url: str
	analyzed_pages: List[AnalyzedPage]
	analysis_date: str
	page_count: int
	discovered_count: int = 0
	screenshots: Optional[Screenshots] = None
	original_company_name: Optional[str] = None

	def to_dict(self) -> Dict:
		return {
			"baseUrl": self.base_url,
			"analyzedPages": [p.to_dict() for p in self.analyzed_pages],
			"analysisDate": self.analysis_date,
			"pageCount": self.page_count,
			"discoveredCount": self.discovered_count,
			"screenshots": self.screenshots.to_dict() if self.screenshots else None,
			"originalCompanyName": self.original_company_name,
		}

	@classmethod
	def from_dict(cls, data: Dict) -> "AnalysisResult":
		pages = [AnalyzedPage.from_dict(p) for p in data.get("analyzedPages", [])]
		return cls(
			base_url=data["baseUrl"],
			analyzed_pages=pages,
			analysis_date=data.get("analysisDate", ""),
			page_count=data.get("pageCount", len(pages)),
			discovered_count=data.get("discoveredCount", 0),
			screenshots=Screenshots.from_dict(data.get("screenshots")),
			original_company_name=data.get("originalCompanyName"),
		)


@dataclass
class SensayBot:
	id: str
	name: str
	system_message: str

	def to_dict(self) -> Dict[str, str]:
		return {"id": self.id, "name": self.name, "systemMessage": self.system_message}

	@classmethod
	def from_dict(cls, data: Dict) -> "SensayBot":
		return cls(id=data["id"], name=data.get("name", ""), system_message=data.get("systemMessage", ""))


@dataclass(frozen=True)
class AnalysisContext:
	"""Where one company's artifacts live. Passed explicitly to every writer and loader."""

	company_name: str
	root_dir: str = "analysis"

	@property
	def company_dir(self) -> str:
		return os.path.join(self.root_dir, self.company_name)

	@property
	def knowledge_base_path(self) -> str:
		return os.path.join(self.company_dir, f"{self.company_name}-knowledge-base.md")

	@property
	def raw_data_path(self) -> str:
		return os.path.join(self.company_dir, f"{self.company_name}-raw-data.json")

	@property
	def bot_path(self) -> str:
		return os.path.join(self.company_dir, f"{self.company_name}-sensay-bot.json")

	@property
	def training_dir(self) -> str:
		return os.path.join(self.company_dir, "sensay-training")

	@property
	def training_pages_dir(self) -> str:
		return os.path.join(self.training_dir, "knowledge-base")

	@property
	def demo_dir(self) -> str:
		return os.path.join(self.company_dir, "demo")
