"""Yoco checkout creation and verified payment webhook notifications."""
