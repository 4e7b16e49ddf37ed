"""Aggregate and CJ upload-set builders."""
