#!/usr/bin/env python3
"""
Vendor attribute tables
Amenity name -> details path mapping and the per-category details allow-lists
"""

# Amenity labels shown in the client filter UI -> stored details path.
# Storage keys are not consistent across categories, so several labels can
# point at the same path. config/amenities.yml may add or override entries.
AMENITY_PATHS = {
    "AC":                 "details.airConditioning",
    "Parking":            "details.parkingCar",
    "Valet Parking":      "details.valetParking",
    "Power Backup":       "details.powerBackup",
    "Electricity Backup": "details.powerBackup",
    "Bridal Room":        "details.bridalSuite",
    "Wheelchair Access":  "details.wheelchair",
    "Sound System":       "details.avEquipment",
    "Lift":               "details.lift",
}

# Keys every category may store under details
COMMON_DETAIL_FIELDS = {
    "selectedServices", "occasions", "photos", "minPrice", "maxPrice",
    "startingPrice", "experienceYears", "languages", "serviceAreas",
    "travelOutstation", "eventTypes",
}

_VENUE_FIELDS = {
    "capacity", "venueType", "seatingCapacity", "floatingCapacity", "diningCapacity",
    "airConditioning", "bridalSuite", "guestRooms", "parkingCar", "parkingBike",
    "valetParking", "powerBackup", "lift", "wheelchair", "avEquipment",
    "cateringPolicy", "decorPolicy", "perPlateVeg", "perPlateNonVeg",
}

# Category-specific keys (on top of COMMON_DETAIL_FIELDS)
CATEGORY_DETAIL_FIELDS = {
    "mandap":        _VENUE_FIELDS,
    "venue":         _VENUE_FIELDS,
    "catering":      {"cuisines", "dietaryOptions", "serviceStyle", "liveCounters",
                      "liveCounterItems", "minGuestCount", "fssaiLicense",
                      "perPlateVeg", "perPlateNonVeg"},
    "decor":         {"decorThemes", "decorOfferings", "designVisualization",
                      "customizationLevel", "inventory"},
    "photography":   {"photographyStyles", "deliverables", "rawFootage", "equipment"},
    "entertainment": {"teamSize", "performanceDuration", "performanceType",
                      "providedEquipment", "equipment"},
}
