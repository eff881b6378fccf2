"""
Chromecast Backgrounds – Download the images shown on the Chromecast home screen.

Supports:
  • Discovering backgrounds from the Chromecast home page (single or repeated polls)
  • Choosing the image quality (2560px, 1920px or 720px variants)
  • Concurrent downloads into a local directory
  • Optional gradient overlay and "Photo by" watermark
  • Resumable operation: images already on disk are never fetched again
"""
