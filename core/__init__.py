"""GarmentFlow core: domain, application, data and infrastructure layers."""
