"""Stok hareket motoru: eşik validasyonu, SKU sınıflandırma, miktar uzlaştırma, kayıt projeksiyonu."""

__version__ = "0.1.0"
