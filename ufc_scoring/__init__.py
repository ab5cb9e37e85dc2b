"""Scoring de picks y estadísticas de usuarios para UFC Picks"""
