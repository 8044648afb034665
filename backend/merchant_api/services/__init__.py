"""
Services module for business logic.

- domain/: menu and inventory services (CategoryService, DishService, InventoryService)
- analytics/: metric formulas, enrichment, statistics (AnalyticsService in analytics.service)
- reports/: report generators, CSV shaping, export (ReportService)

Usage:
    from merchant_api.services.domain import CategoryService
    service = CategoryService(store)
    categories = service.list_categories(is_active=True)
"""
