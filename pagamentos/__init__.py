"""Dominio de pagamentos para o mercado brasileiro.

Nucleo funcional puro: validacao de documentos, codigo PIX (BR Code),
maquinas de estado de pagamento/assinatura, tributos e frete.
Nenhum modulo deste pacote faz IO de rede ou banco de dados.
"""
