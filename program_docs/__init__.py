"""
Program Docs - generate static documentation pages from an INBOX of
program files named Chapt<N><Exercise|Fig><#>[variant].<ext>.

Files sharing a name are grouped into one program across formats
(MATLAB, LaTeX, PDF, HTML, notebooks, text) and published with a
Docusaurus sidebar.
"""

__version__ = "2.0.0"

from program_docs.builder import DocumentationBuilder, RunStatistics, SourceNotFoundError
from program_docs.classifier import ProgramIdentity, ProgramKind, classify, identify
from program_docs.config import DEFAULT_CONFIG, GeneratorConfig, load_config

__all__ = [
    "DocumentationBuilder",
    "RunStatistics",
    "SourceNotFoundError",
    "ProgramIdentity",
    "ProgramKind",
    "classify",
    "identify",
    "DEFAULT_CONFIG",
    "GeneratorConfig",
    "load_config",
    "__version__",
]
