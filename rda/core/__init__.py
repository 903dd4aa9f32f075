"""Core auction engine: pricing, settlement, custody and storage"""
