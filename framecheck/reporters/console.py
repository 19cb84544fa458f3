from colorama import init as colorama_init, Fore, Style
from datetime import datetime

from framecheck.core.models import TestVerdict
from framecheck.reporters.fields import (
    missing_summary, status_label, format_tested_at,
)

colorama_init(autoreset=True)


class Log:
    def __init__(self, verbose: int = 1):
        self.verbose = verbose
        self.HDR = Fore.GREEN

    def _time(self):
        return datetime.now().strftime("[%H:%M:%S]")

    def _fmt(self, level: str, color: str):
        return f"{self._time()} {color}[{level}]{Style.RESET_ALL}"

    def info(self, msg: str):
        if self.verbose >= 1:
            print(f"{self._fmt('INFO', Fore.CYAN)} {msg}")

    def warn(self, msg: str):
        if self.verbose >= 0:
            print(f"{self._fmt('WARNING', Fore.YELLOW)} {msg}")

    def ok(self, msg: str):
        print(f"{self._fmt('SUCCESS', Fore.GREEN)} {msg}")

    def fail(self, msg: str):
        print(f"{self._fmt('FAIL', Fore.RED)} {msg}")

    def debug(self, msg: str):
        if self.verbose >= 2:
            print(f"{self._fmt('DEBUG', Fore.MAGENTA)} {msg}")

    def verdict(self, v: TestVerdict):
        col = {True: Fore.RED, False: Fore.GREEN}.get(v.is_vulnerable, Fore.YELLOW)
        level = {True: "CRITICAL", False: "SUCCESS"}.get(v.is_vulnerable, "WARNING")
        print(f"{self._fmt(level, col)} Site is "
              f"{col}{status_label(v)}{Style.RESET_ALL} to Clickjacking")
        print(f"    Site:            {v.target_url}")
        print(f"    IP Address:      {v.source_ip}")
        print(f"    Time:            {format_tested_at(v)}")
        print(f"    Missing Headers: {Fore.RED}{missing_summary(v)}{Style.RESET_ALL}")
        print(f"    Reason:          {v.rationale}")
        if self.verbose >= 2 and v.raw_headers:
            print(f"    {self.HDR}Raw Headers:{Style.RESET_ALL}")
            for line in v.raw_headers.splitlines():
                print(f"    {Style.DIM}{line}{Style.RESET_ALL}")
