"""leadgen_chat: motor de conversa para qualificação de leads (Smart LeadGen)."""

__version__ = "0.1.0"
