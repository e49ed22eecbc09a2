"""
API de controle de processos do escritório
"""
