from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date

from PIL import Image

from onboarding.forms.models import FormSnapshot
from onboarding.report.document import ReportDocument
from onboarding.report.layout import ReportLayout
from onboarding.report.models import GeneratedReport, RenderCursor, ReportSettings
from onboarding.report.painters import FieldRenderer, PageDecorator


@dataclass(slots=True)
class ReportContext:
    snapshot: FormSnapshot
    settings: ReportSettings
    layout: ReportLayout
    document: ReportDocument
    contract_html: str
    generated_on: date
    cursor: RenderCursor = field(default_factory=RenderCursor)
    logo: Image.Image | None = None
    signature: Image.Image | None = None
    decorator: PageDecorator | None = None
    fields: FieldRenderer | None = None
    contract_pages: int = 0
    report: GeneratedReport | None = None

    def require_decorator(self) -> PageDecorator:
        if self.decorator is None:
            raise ValueError("ReportContext.decorator must be set before drawing pages")
        return self.decorator

    def require_fields(self) -> FieldRenderer:
        if self.fields is None:
            raise ValueError("ReportContext.fields must be set before drawing fields")
        return self.fields


class ReportStep(ABC):
    @abstractmethod
    def run(self, context: ReportContext) -> ReportContext:
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the step. Most steps hold none."""
