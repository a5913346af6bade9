from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from config.settings import settings
from schemas.reports import AIReport

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class PDFService:
    def __init__(self, template_dir: Optional[str] = None):
        # 템플릿 환경 설정
        template_dir = Path(template_dir or settings.TEMPLATE_DIR or DEFAULT_TEMPLATE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["score"] = _score

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML을 PDF로 변환"""
        # weasyprint는 시스템 라이브러리(pango 등)가 필요해 호출 시점에 로드
        import weasyprint
        return weasyprint.HTML(string=html_content).write_pdf()

    def render_grade_report_html(self, subject_name: str, report: AIReport,
                                 records: Sequence[Any]) -> str:
        return self._render_template("grade_report.html", {
            "subject_name": subject_name,
            "report": report,
            "records": records,
        })

    def generate_grade_report_pdf(self, subject_name: str, report: AIReport,
                                  records: Sequence[Any]) -> bytes:
        """AI 성적 분석 리포트 PDF 생성"""
        html = self.render_grade_report_html(subject_name, report, records)
        return self._html_to_pdf(html)


def _score(value: Any) -> Any:
    # 빈 점수는 0으로 표시
    return 0 if value in (None, "") else value
