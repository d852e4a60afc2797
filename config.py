# config.py
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass
class FetchConfig:
    site: str = "https://en.cppreference.com"
    api_path: str = "/mwiki/api.php"
    # seconds, per request
    timeout: float = 30.0
    user_agent: str = "cppref-support-info/1.0"


@dataclass
class LanguageProfile:
    name: str
    catalog: Tuple[str, ...]
    # e.g. "Template:cpp/compiler support/17"
    page_title_template: str
    # class suffix of revision markers, "t-since-cxx17" -> "cxx"
    marker_prefix: str
    ftm_macro_pattern: str
    ftm_defining_prefix: str
    paper_index_title: Optional[str] = None
    ftm_table_selector: str = "table.t-feature-test-macro"
    dr_table_selector: str = "table.dsctable"
    compiler_selector: str = ".t-compiler-support-top"
    library_selector: str = ".t-standard-library-support-top"

    def page_title(self, revision: str) -> str:
        return self.page_title_template.format(rev=revision)


@dataclass
class RenderConfig:
    content_selector: str = "#mw-content-text"
    heading: str = "Support status"
    placeholder_label: str = "N/A"


@dataclass
class AppConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    render: RenderConfig = field(default_factory=RenderConfig)


PROFILES: Dict[str, LanguageProfile] = {
    "cpp": LanguageProfile(
        name="cpp",
        catalog=("11", "14", "17", "20", "23", "26"),
        page_title_template="Template:cpp/compiler support/{rev}",
        marker_prefix="cxx",
        ftm_macro_pattern=r"__cpp_\w+",
        ftm_defining_prefix="__cpp_",
        paper_index_title="cpp/compiler support/defect reports",
    ),
    "c": LanguageProfile(
        name="c",
        catalog=("99", "23"),
        page_title_template="Template:c/compiler support/{rev}",
        marker_prefix="c",
        ftm_macro_pattern=r"__STDC_\w+",
        ftm_defining_prefix="__STDC_",
    ),
}

# Global defaults used across modules
DEFAULTS = AppConfig()
