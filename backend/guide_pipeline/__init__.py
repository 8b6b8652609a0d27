"""
Furniture upcycling guide generation pipeline.

This package orchestrates:
1. Guide text generation with Gemini (retry with backoff)
2. Per-step image generation with Imagen (primary + fallback model)
3. Image upload to object storage
4. Persistence of the guide onto its project
"""
