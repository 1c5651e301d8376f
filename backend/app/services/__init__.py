"""
Tourlist Backend - Services Layer
==================================

Service Inventory:
    - validation: mutation validators (trim, defaults, numeric checks)
    - CategoryService / AttractionService / HotelService / ReviewService:
      stateless CRUD over the request's AsyncSession
    - MediaService (abstract) and CloudinaryMediaService: image host client
      with retry and circuit breaker
    - UploadService: validates a batch of files and uploads it all or nothing

Services raise TourlistError subclasses only; anything else coming out of
the store is wrapped in StorageError.
"""
