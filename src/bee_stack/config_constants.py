#!/usr/bin/env python3
"""
Names, paths and URLs used by the bee-stack launcher.

This is the single place for filenames and links. Other modules import from
here instead of repeating string literals.
"""

from pathlib import Path

# ============================================================================
# Environment file
# ============================================================================

# Rendered configuration (working directory root)
ENV_FILE = '.env'
# Staging file, renamed onto ENV_FILE once fully written
ENV_TMP_FILE = '.env.tmp'
# Jinja2 template shipped with the package
ENV_TEMPLATE = 'env.j2'
TEMPLATES_DIR = Path(__file__).resolve().parent / 'templates'

# Keys written by setup
RUNTIME_KEY = 'RUNTIME'
LLM_BACKEND_KEY = 'LLM_BACKEND'

# ============================================================================
# Runtime and compose requirements
# ============================================================================

SUPPORTED_RUNTIMES = ('docker', 'podman')
COMPOSE_EXECUTABLE = 'docker-compose'
REQUIRED_COMPOSE_VERSION = '2.26'

# Compose profiles defined by the stack's compose file
PROFILE_ALL = 'all'
PROFILE_INFRA = 'infra'

# ============================================================================
# Working directories
# ============================================================================

TMP_DIR = 'tmp'
CODE_INTERPRETER_STORAGE = f'{TMP_DIR}/code-interpreter-storage'
LOGS_DIR = 'logs'
LOGS_TIMESTAMP_FORMAT = '%Y-%m-%d_%H%M%S'
LOGS_SUMMARY_FILE = 'summary.toml'

# ============================================================================
# Links
# ============================================================================

UI_URL = 'http://localhost:3000'
TROUBLESHOOTING_URL = 'https://github.com/i-am-bee/bee-stack/blob/main/docs/troubleshooting.md'
ISSUE_URL = 'https://github.com/i-am-bee/bee-stack/issues/new?template=run_stack_issue.md'
OLLAMA_FAQ_URL = 'https://github.com/ollama/ollama/blob/main/docs/faq.md#how-do-i-configure-ollama-server'

# Image used to probe host services from inside a container
CURL_IMAGE = 'curlimages/curl'


def staged_env_path(env_path: Path) -> Path:
    """
    Get the staging file that sits next to an environment file.

    Examples:
        >>> staged_env_path(Path('/srv/bee/.env'))
        PosixPath('/srv/bee/.env.tmp')
    """
    return env_path.with_name(ENV_TMP_FILE)
