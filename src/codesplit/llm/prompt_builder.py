"""
Prompt builder for split requests.

Responsible for:
- Loading and rendering Jinja2 templates (planning and generation prompts)
- Attaching the output budget each kind of request needs
- Naming the target language and its source suffix in the prompts
"""

from pathlib import Path
from typing import Optional

import structlog
from jinja2 import Environment, FileSystemLoader

from codesplit.models.llm_models import Prompt


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptBuilder:
    """
    Build prompts for the planning call and the per-file generation calls.

    Handles:
    - Template rendering (Jinja2)
    - Per-request token budgets
    - Language conventions (name, source suffix)
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        language: str = "Go",
        source_suffix: str = ".go",
        plan_max_tokens: int = 500,
        pair_max_tokens: int = 6000,
        source_max_tokens: int = 3000,
        stub_max_tokens: int = 2000,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates (default: bundled)
            language: Target language name used in the prompts
            source_suffix: Source file suffix used in filename examples
            plan_max_tokens: Output budget of the planning prompt
            pair_max_tokens: Output budget of a source + test generation prompt
            source_max_tokens: Output budget of a source-only generation prompt
            stub_max_tokens: Output budget of a test-stub generation prompt
        """
        self.templates_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)
        self.language = language
        self.source_suffix = source_suffix
        self.plan_max_tokens = plan_max_tokens
        self.pair_max_tokens = pair_max_tokens
        self.source_max_tokens = source_max_tokens
        self.stub_max_tokens = stub_max_tokens

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False  # We're generating prompts, not HTML
        )

        try:
            self.plan_template = self.jinja_env.get_template("plan_prompt.txt")
            self.pair_template = self.jinja_env.get_template("pair_prompt.txt")
            self.source_template = self.jinja_env.get_template("source_prompt.txt")
            self.stub_template = self.jinja_env.get_template("stub_prompt.txt")
            logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e))
            raise

    @classmethod
    def from_settings(cls, settings) -> "PromptBuilder":
        """Build a prompt builder from TARGET_LANGUAGE, SOURCE_SUFFIX and *_MAX_TOKENS."""
        return cls(
            language=settings.TARGET_LANGUAGE,
            source_suffix=settings.SOURCE_SUFFIX,
            plan_max_tokens=settings.PLAN_MAX_TOKENS,
            pair_max_tokens=settings.PAIR_MAX_TOKENS,
            source_max_tokens=settings.SOURCE_MAX_TOKENS,
            stub_max_tokens=settings.STUB_MAX_TOKENS,
        )

    def _render(self, template, **context) -> str:
        return template.render(
            language=self.language,
            suffix=self.source_suffix,
            **context,
        ).strip()

    def build_plan_prompt(
        self,
        source_name: str,
        source: str,
        test_name: Optional[str] = None,
        test: Optional[str] = None,
    ) -> Prompt:
        """
        Build the planning prompt asking for a JSON array of filenames.

        When test content is given, the model sees source and tests together
        and is asked to keep tested code together.

        Args:
            source_name: Name of the file being split
            source: Its content
            test_name: Name of its test file, if any
            test: Test file content, if any

        Returns:
            Prompt with the planning budget
        """
        text = self._render(
            self.plan_template,
            source_name=source_name,
            source=source,
            test_name=test_name or "",
            test=test or "",
        )
        logger.debug(
            "Plan prompt built",
            source_name=source_name,
            with_tests=bool(test),
            prompt_length=len(text),
        )
        return Prompt(text=text, max_tokens=self.plan_max_tokens)

    def build_pair_prompt(self, target: str, source: str, test_target: str, test: str) -> Prompt:
        """
        Build the prompt generating one source file and its test file as JSON.

        The reply is expected as {"source": "...", "test": "..."} and is read
        back with parse_source_and_test.
        """
        text = self._render(
            self.pair_template,
            target=target,
            source=source,
            test_target=test_target,
            test=test,
        )
        return Prompt(text=text, max_tokens=self.pair_max_tokens)

    def build_source_prompt(self, target: str, source: str) -> Prompt:
        """Build the prompt generating one source file as plain code."""
        text = self._render(self.source_template, target=target, source=source)
        return Prompt(text=text, max_tokens=self.source_max_tokens)

    def build_stub_prompt(self, target: str, code: str) -> Prompt:
        """Build the prompt generating test stubs for a freshly split file."""
        text = self._render(self.stub_template, target=target, code=code)
        return Prompt(text=text, max_tokens=self.stub_max_tokens)
