"""
Assessment Services Package für DSP (Digital Solutions Platform)

Dieses Paket enthält die Services der Assessment Engine:
- Definition Services (Prüfungen und Fragen)
- Grading Services (Bewertungsalgorithmus)
- Attempt Services (Versuche starten und abgeben)
- Results Services (Auswertungen)

Struktur:
├── definitions/   # Prüfungsdefinitionen
├── grading/       # Reine Bewertungsfunktionen
├── attempts/      # Versuchs-Lebenszyklus
└── results/       # Lesende Auswertungen

Author: DSP Development Team
Version: 1.0.0
"""

# Grading Services
from .grading import GradedAnswer, GradingResult, grade_answer, grade_submission

# Definition Services
from .definitions import DefinitionService

# Attempt Services
from .attempts import AttemptService, AttemptStart

# Results Services
from .results import ResultsService, SubmissionStatistics

__all__ = [
    # Grading
    "GradedAnswer",
    "GradingResult",
    "grade_answer",
    "grade_submission",
    # Definitions
    "DefinitionService",
    # Attempts
    "AttemptService",
    "AttemptStart",
    # Results
    "ResultsService",
    "SubmissionStatistics",
]
