"""
ANSI colour and emoji tables for console output
"""

from typing import Dict

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"

GRAY = "\033[90m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
WHITE = "\033[37m"
BG_RED_WHITE = "\033[41;37m"
BG_YELLOW_BLACK = "\033[43;30m"

# Severity tags
SEVERITY_COLORS: Dict[str, str] = {
    "trace": GRAY,
    "debug": BLUE,
    "info": CYAN,
    "warn": YELLOW,
    "error": RED,
    "fatal": BG_RED_WHITE,
}

# Category tags
CATEGORY_COLORS: Dict[str, str] = {
    "success": GREEN,
    "verbose": WHITE,
    "silly": MAGENTA,
    "test": BLUE,
    "mock": GRAY,
    "http": MAGENTA,
    "request": BLUE,
    "response": CYAN,
    "graphql": MAGENTA + BOLD,
    "websocket": BLUE + BOLD,
    "api": CYAN + BOLD,
    "security": BG_YELLOW_BLACK,
    "audit": YELLOW + BOLD,
    "auth": YELLOW,
    "access": YELLOW,
    "firewall": RED + BOLD,
    "database": BLUE + BOLD,
    "query": BLUE,
    "migration": BLUE,
    "cache": CYAN,
    "performance": GREEN + BOLD,
    "metric": GREEN,
    "benchmark": GREEN,
    "memory": YELLOW,
    "system": WHITE + BOLD,
    "process": WHITE,
    "cpu": YELLOW,
    "disk": YELLOW,
    "network": CYAN,
    "kubernetes": BLUE + BOLD,
    "docker": BLUE,
    "cloud": CYAN,
    "serverless": YELLOW,
    "business": GREEN + BOLD,
    "transaction": GREEN,
    "workflow": BLUE,
    "event": YELLOW,
    "integration": MAGENTA + BOLD,
    "webhook": MAGENTA,
    "external": CYAN,
    "ui": CYAN + BOLD,
    "interaction": CYAN,
    "analytics": BLUE,
    "tracking": YELLOW,
    "job": BLUE + BOLD,
    "queue": BLUE,
    "cron": YELLOW,
    "task": WHITE,
    "mobile": MAGENTA + BOLD,
    "push": MAGENTA,
    "offline": YELLOW,
    "sync": GREEN,
}

CATEGORY_SYMBOLS: Dict[str, str] = {
    "trace": "🔍",
    "debug": "🐛",
    "info": "ℹ️",
    "warn": "⚠️",
    "error": "❌",
    "fatal": "💀",
    "success": "✅",
    "verbose": "📝",
    "silly": "🤪",
    "test": "🧪",
    "mock": "🎭",
    "http": "🌐",
    "request": "📤",
    "response": "📥",
    "graphql": "⚡",
    "websocket": "🔌",
    "api": "🚀",
    "security": "🔒",
    "audit": "📝",
    "auth": "🔑",
    "access": "🚪",
    "firewall": "🛡️",
    "database": "🗄️",
    "query": "📊",
    "migration": "🔄",
    "cache": "💾",
    "performance": "⚡",
    "metric": "📊",
    "benchmark": "🏃",
    "memory": "🧠",
    "system": "🖥️",
    "process": "⚙️",
    "cpu": "📈",
    "disk": "💿",
    "network": "🌐",
    "kubernetes": "☸️",
    "docker": "🐳",
    "cloud": "☁️",
    "serverless": "⚡",
    "business": "💼",
    "transaction": "💰",
    "workflow": "📑",
    "event": "🎯",
    "integration": "🔄",
    "webhook": "🪝",
    "external": "🌍",
    "ui": "👤",
    "interaction": "🖱️",
    "analytics": "📈",
    "tracking": "👀",
    "job": "⚡",
    "queue": "📋",
    "cron": "⏰",
    "task": "✔️",
    "mobile": "📱",
    "push": "🔔",
    "offline": "📴",
    "sync": "🔄",
}


def colorize(text: str, code: str, enabled: bool = True) -> str:
    """Wrap text in an ANSI code; returns text unchanged when disabled."""
    if not enabled or not code:
        return text
    return f"{code}{text}{RESET}"


def severity_color(severity: str) -> str:
    return SEVERITY_COLORS.get(severity, "")


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, SEVERITY_COLORS.get(category, WHITE))


def category_symbol(category: str) -> str:
    return CATEGORY_SYMBOLS.get(category, "")
