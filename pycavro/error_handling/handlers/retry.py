async def basic_retry_handler(func, error, **kwargs):
  """Retry the failed call once more with the same arguments."""
  return await func(**kwargs)
