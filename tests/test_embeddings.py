"""Tests for embedding generation."""

from fakes import FakeOpenAIClient, rate_limit_error, server_error

from antnews.enrichment import EmbeddingGenerator, EnrichmentErrorKind


def make_generator(client, sleep, dimensions=3) -> EmbeddingGenerator:
    return EmbeddingGenerator(client, model="test-embed", dimensions=dimensions, sleep=sleep)


async def test_generates_embedding(sleep):
    client = FakeOpenAIClient(embed=lambda text: [0.1, 0.2, 0.3])
    result = await make_generator(client, sleep).generate("Ants build bridges")

    assert result.success
    assert result.embedding == [0.1, 0.2, 0.3]
    assert client.embedding_calls == [
        {"model": "test-embed", "input": "Ants build bridges", "encoding_format": "float"}
    ]


async def test_empty_input_makes_no_call(sleep):
    client = FakeOpenAIClient()
    result = await make_generator(client, sleep).generate("   ")

    assert not result.success
    assert result.error_kind == EnrichmentErrorKind.EMPTY_INPUT
    assert len(client.embedding_calls) == 0


async def test_missing_client_is_configuration_failure(sleep):
    result = await make_generator(None, sleep).generate("Ants")

    assert not result.success
    assert result.error_kind == EnrichmentErrorKind.CONFIGURATION


async def test_rate_limit_retries_twice_then_gives_up(sleep):
    def embed(text):
        raise rate_limit_error()

    client = FakeOpenAIClient(embed=embed)
    result = await make_generator(client, sleep).generate("Ants")

    assert not result.success
    assert result.rate_limited
    assert len(client.embedding_calls) == 3
    assert sleep.delays == [5.0, 10.0]


async def test_rate_limit_then_success(sleep):
    attempts = []

    def embed(text):
        attempts.append(text)
        if len(attempts) == 1:
            raise rate_limit_error()
        return [1.0, 0.0, 0.0]

    result = await make_generator(FakeOpenAIClient(embed=embed), sleep).generate("Ants")

    assert result.success
    assert sleep.delays == [5.0]


async def test_server_error_is_not_retried(sleep):
    def embed(text):
        raise server_error(503)

    client = FakeOpenAIClient(embed=embed)
    result = await make_generator(client, sleep).generate("Ants")

    assert result.error_kind == EnrichmentErrorKind.HTTP_STATUS
    assert len(client.embedding_calls) == 1
    assert sleep.delays == []


async def test_wrong_dimension_is_invalid(sleep):
    client = FakeOpenAIClient(embed=lambda text: [1.0, 0.0])
    result = await make_generator(client, sleep).generate("Ants")

    assert result.error_kind == EnrichmentErrorKind.INVALID_RESPONSE
