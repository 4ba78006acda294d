"""
Assessment Package - DSP (Digital Solutions Platform)

Dieses Paket enthält die Assessment Engine der Kursplattform.
Ermöglicht benotete Quizze und Prüfungen mit Versuchsgrenzen,
Zeitlimits sowie automatischer und manueller Bewertung.

Features:
- Prüfungsdefinitionen mit geordneten Fragen
- Automatische Bewertung objektiver Fragetypen
- Versuchsverwaltung mit Fortsetzen und Versuchslimit
- Auswertungen je Lernendem und je Prüfung

Struktur:
- definitions/: Prüfungen und Fragen
- attempts/: Versuche und Antworten
- services/: Definitions-, Bewertungs-, Versuchs- und Auswertungs-Services
- tests/: Test-Suite

Author: DSP Development Team
Version: 1.0.0
"""
