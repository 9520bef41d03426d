"""Shared fixtures for core unit tests"""

import pytest

from mdblog.core.parse import make_parser, parse_file


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text and ![diagram](img/net.png).

```python
print("hello")
```

<img src="img/raw.png" alt="raw">

```bash
ls -la
```

```
plain fence
```
"""


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser("gfm-like")


@pytest.fixture(name="sample_tokens")
def sample_tokens_fixture(parser):
    return parser.parse(SAMPLE_MD)


@pytest.fixture(name="parse_text")
def parse_text_fixture(corpus):
    """Write text at a corpus-relative path and return its ParsedDoc."""
    def _parse(rel_path: str, text: str):
        return parse_file(corpus(rel_path, text), corpus.root)
    return _parse
