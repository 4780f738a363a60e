"""seqex CLI commands"""
