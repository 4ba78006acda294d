"""
Assessment Attempt Views Package - DSP (Digital Solutions Platform)

Dieses Paket enthält alle Views rund um Prüfungsversuche.

Features:
- Lernenden-Views: Versuch starten, abgeben, eigene Ergebnisse
- Lehrenden-Views: Ergebnislisten und Statistiken je Prüfung

Author: DSP Development Team
Version: 1.0.0
"""

from .student_views import *
from .instructor_views import *
