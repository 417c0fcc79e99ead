from core.query_classifier import QueryClassifier


def test_weather_question_with_city():
    intent = QueryClassifier().detect_intent("What's the weather in Paris?", {})

    assert intent.type == "weather"
    assert intent.entities.location == "Paris"
    assert intent.confidence == 0.9
    assert intent.raw_message == "What's the weather in Paris?"


def test_multi_word_city_is_captured():
    intent = QueryClassifier().detect_intent("Will it rain in New York tomorrow?", {})

    assert intent.type == "weather"
    assert intent.entities.location == "New York"
    assert intent.entities.time_reference == "tomorrow"


def test_lowercase_place_is_not_a_location():
    intent = QueryClassifier().detect_intent("what is the weather in paris", {})
    assert intent.entities.location is None


def test_empty_message_is_general_with_low_confidence():
    intent = QueryClassifier().detect_intent("", {})

    assert intent.type == "general"
    assert intent.confidence == 0.3
    assert all(score == 0 for score in intent.scores.values())


def test_no_signal_with_known_destination_falls_back_to_weather():
    intent = QueryClassifier().detect_intent("and on saturday?", {"destination": "Rome"})

    assert intent.type == "weather"
    assert intent.confidence == 0.3


def test_greeting_is_general():
    intent = QueryClassifier().detect_intent("hello there", {})
    assert intent.type == "general"
    assert intent.scores["general"] >= 3


def test_keywords_and_patterns_are_weighted():
    scores = QueryClassifier().score_message("where to stay in Lisbon")
    # "stay" keyword (+1) and the "where to stay" pattern (+2)
    assert scores["accommodation"] == 3


def test_activities_collects_every_match():
    intent = QueryClassifier().detect_intent("Planning hiking, a museum and some shopping in Oslo", {})
    assert intent.entities.activities == ["hiking", "museum", "shopping"]


def test_first_time_reference_pattern_wins():
    intent = QueryClassifier().detect_intent("Going next week or maybe in March", {})
    assert intent.entities.time_reference == "next week"


def test_month_reference():
    intent = QueryClassifier().detect_intent("best time to visit Japan in april?", {})
    assert intent.entities.time_reference == "april"
    assert intent.type == "weather"


def test_confidence_bands():
    assert QueryClassifier.calculate_confidence([("weather", 0), ("general", 0)]) == 0.3
    assert QueryClassifier.calculate_confidence([("weather", 3), ("general", 1)]) == 0.9
    assert QueryClassifier.calculate_confidence([("weather", 2), ("general", 1)]) == 0.7
    assert QueryClassifier.calculate_confidence([("weather", 2), ("general", 2)]) == 0.5


def test_tie_keeps_declaration_order():
    # "hot" (weather) and "hotel" (accommodation) both score, weather is declared first
    intent = QueryClassifier().detect_intent("hotel", {})
    assert intent.scores["weather"] == 1
    assert intent.scores["accommodation"] == 1
    assert intent.type == "weather"
    assert intent.confidence == 0.5


def test_classifier_is_deterministic():
    classifier = QueryClassifier()
    context = {"destination": "Paris"}
    first = classifier.detect_intent("Should I bring umbrella for hiking in Paris next week?", context)
    second = classifier.detect_intent("Should I bring umbrella for hiking in Paris next week?", context)
    assert first == second
