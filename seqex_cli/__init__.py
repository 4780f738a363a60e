"""seqex command line interface"""
