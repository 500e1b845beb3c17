"""Poker Night Manager backend."""
