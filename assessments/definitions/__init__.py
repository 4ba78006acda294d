"""
Assessment Definitions Package - DSP (Digital Solutions Platform)

Dieses Paket enthält Prüfungen, deren Fragen sowie die zugehörigen
Serializer und Views für Autoren.

Struktur:
- models.py: Assessment und Question
- serializers.py: API-Serialisierung der Definitionen
- views.py: Anlegen, Ändern, Löschen und Auflisten

Author: DSP Development Team
Version: 1.0.0
"""
