"""seqex CLI helpers"""
