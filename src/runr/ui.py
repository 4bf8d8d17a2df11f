"""
ui - ANSI colour helpers and section banners.
"""

import sys


def _c(code: str, text: str) -> str:
    if not sys.stdout.isatty():
        return text
    return f"\033[{code}m{text}\033[0m"

def green(t):   return _c("32", t)
def red(t):     return _c("31", t)
def yellow(t):  return _c("33", t)
def cyan(t):    return _c("36", t)
def grey(t):    return _c("90", t)
def bold(t):    return _c("1",  t)
def dim(t):     return _c("2",  t)


def header(title: str, subtitle: str = "") -> None:
    print(f"\n{bold('━' * 72)}")
    if subtitle:
        print(f"  {bold(cyan(title))}  {grey('─')}  {grey(subtitle)}")
    else:
        print(f"  {bold(cyan(title))}")
    print(f"{bold('━' * 72)}\n")


def sep(char: str = "─", width: int = 72) -> None:
    print(grey(char * width))
