"""Implementations of the init, sync, chat, workon and issue commands."""