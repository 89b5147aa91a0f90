"""Подсистема настроек: группы, валидаторы и реестр."""
