"""
Assessment Attempts Package - DSP (Digital Solutions Platform)

Dieses Paket enthält Prüfungsversuche (Submissions) und die bewerteten
Antworten sowie die Views für Lernende und Lehrende.

Struktur:
- models.py: Submission und Answer
- serializers.py: API-Serialisierung der Versuche
- views/: Lernenden- und Lehrenden-Views

Author: DSP Development Team
Version: 1.0.0
"""
