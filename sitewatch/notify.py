# File: sitewatch/notify.py
"""sitewatch.notify: email notifications for finished crawls and comparisons."""

from __future__ import annotations

import smtplib
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Callable, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitewatch.compare import ComparisonReport
from sitewatch.config import EmailSettings
from sitewatch.crawler.models import CrawlResult
from sitewatch.logger import logger
from sitewatch.report import DEFAULT_TEMPLATE_DIR

CRAWL_TEMPLATE = "crawl_email.html.j2"
COMPARISON_TEMPLATE = "comparison_email.html.j2"


class EmailNotifier:
    """Renders summary emails with Jinja2 and delivers them over SMTP."""

    def __init__(
        self,
        settings: EmailSettings,
        template_dir: Union[str, Path, None] = None,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.settings = settings
        self._smtp_factory = smtp_factory
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
            autoescape=select_autoescape(["html", "xml", "j2"]),
        )

    @property
    def enabled(self) -> bool:
        return self.settings.send_output_emails

    def build_message(self, subject: str, template: str, **context: Any) -> EmailMessage:
        context.setdefault("finished_at", datetime.now())
        html = self._env.get_template(template).render(**context)

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.from_email
        msg["To"] = self.settings.to_email
        msg.set_content(subject)
        msg.add_alternative(html, subtype="html")
        return msg

    def send_crawl_summary(self, root_url: str, result: CrawlResult) -> bool:
        subject = f"Web scrape of {root_url} completed successfully!"
        msg = self.build_message(
            subject,
            CRAWL_TEMPLATE,
            root_url=root_url,
            url_count=result.url_count,
            files_written=result.files_written,
            output_dir=str(result.output_dir or ""),
        )
        return self.send(msg)

    def send_comparison(self, root_url: str, report: ComparisonReport) -> bool:
        msg = self.build_message(
            "Web scraper has completed comparison",
            COMPARISON_TEMPLATE,
            root_url=root_url,
            **report.to_dict(),
        )
        return self.send(msg)

    def send(self, msg: EmailMessage) -> bool:
        """Deliver *msg*; SMTP and socket errors are logged and reported as False."""
        s = self.settings
        try:
            with self._smtp_factory(s.smtp_host, s.port, timeout=30) as smtp:
                if s.use_tls:
                    smtp.starttls()
                if s.username and s.password:
                    smtp.login(s.username, s.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Sending email failed: %s", exc)
            return False
        logger.info("Email sent to %s: %s", s.to_email, msg["Subject"])
        return True


def build_notifier(settings: EmailSettings) -> Optional[EmailNotifier]:
    """Return a notifier when emails are switched on in *settings*."""
    return EmailNotifier(settings) if settings.send_output_emails else None


__all__ = ["EmailNotifier", "build_notifier"]
