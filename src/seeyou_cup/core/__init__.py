"""Text codecs and the CUP parser/serializer."""
